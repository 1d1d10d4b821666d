from flask import Blueprint, current_app, request
from flask_login import current_user

from ladder.api import envelope, json_body
from ladder.endpoints import Endpoint, route
from ladder.errors import InvalidArgument
from ladder.services import account_directory, token_store

main = Blueprint('main', __name__)


def _session_payload(account):
    token = token_store().issue(account.id)
    return {'user': account.to_dict(), 'token': token}


@route(main, Endpoint.REGISTER)
def register():
    data = json_body()
    account = account_directory().register(
        data.get('username'),
        data.get('password'),
        name=data.get('name'),
        surname=data.get('surname'),
    )
    return envelope(_session_payload(account), code=201)


@route(main, Endpoint.LOGIN)
def login():
    data = json_body()
    account = account_directory().authenticate(data.get('username'), data.get('password'))
    current_app.logger.info(f"[login] account={account.id}")
    return envelope(_session_payload(account))


@route(main, Endpoint.UPDATE_PROFILE)
def update():
    account = account_directory().update(current_user.id, json_body())
    return envelope(account.to_dict())


@route(main, Endpoint.GET_ACCOUNT_DETAILS)
def user_details():
    raw_id = request.args.get('id')
    if not raw_id:
        raise InvalidArgument('ID is required')
    try:
        account_id = int(raw_id)
    except ValueError:
        raise InvalidArgument('Invalid id parameter') from None
    account = account_directory().get(account_id)
    return envelope(account.to_dict())
