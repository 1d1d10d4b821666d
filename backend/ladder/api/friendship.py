from flask import Blueprint, request
from flask_login import current_user

from ladder.api import envelope, json_body
from ladder.endpoints import Endpoint, route
from ladder.errors import InvalidArgument
from ladder.services import account_directory, friend_request_ledger, friendship_graph

friendship = Blueprint('friendship', __name__)


@route(friendship, Endpoint.SEARCH_ACCOUNT_BY_USERNAME)
def search():
    username = request.args.get('username', '')
    account_id = account_directory().find_id(username)
    if account_id == current_user.id:
        raise InvalidArgument('You cannot search your own username')
    return envelope(account_id)


@route(friendship, Endpoint.SEND_FRIEND_REQUEST)
def send_friend_request():
    data = json_body()
    friend_request_ledger().send(current_user.id, data.get('userid'))
    return envelope('Friend request sent')


@route(friendship, Endpoint.LIST_FRIEND_REQUESTS)
def list_friend_requests():
    requests = friend_request_ledger().list(
        current_user.id,
        request.args.get('page'),
        request.args.get('count'),
    )
    return envelope([r.to_dict() for r in requests])


@route(friendship, Endpoint.RESPOND_TO_FRIEND_REQUEST)
def respond_friend_request():
    data = json_body()
    friend_request_ledger().respond(current_user.id, data.get('requester_id'), data.get('status'))
    return envelope('Friend request processed')


@route(friendship, Endpoint.LIST_FRIENDS)
def list_friends():
    friends = friendship_graph().list(
        current_user.id,
        request.args.get('page'),
        request.args.get('count'),
    )
    return envelope([f.to_dict() for f in friends])
