from enum import Enum

from flask_login import login_required


class Endpoint(Enum):
    """Every HTTP operation, with its path, allowed method and auth requirement."""

    REGISTER = ('/register', 'POST', False)
    LOGIN = ('/login', 'POST', False)
    UPDATE_PROFILE = ('/update', 'POST', True)
    RECORD_MATCH_RESULT = ('/matchresult', 'POST', True)
    GET_LEADERBOARD_PAGE = ('/leaderboard', 'GET', True)
    # No token check here; kept open pending a product decision.
    GET_ACCOUNT_DETAILS = ('/userdetails', 'GET', False)
    RUN_SIMULATION = ('/simulation', 'GET', True)
    SEARCH_ACCOUNT_BY_USERNAME = ('/friendship/search', 'GET', True)
    SEND_FRIEND_REQUEST = ('/friendship/friendrequest', 'POST', True)
    LIST_FRIEND_REQUESTS = ('/friendship/friendrequestlist', 'GET', True)
    RESPOND_TO_FRIEND_REQUEST = ('/friendship/respondrequest', 'POST', True)
    LIST_FRIENDS = ('/friendship/friendlist', 'GET', True)

    def __init__(self, path, method, requires_auth):
        self.path = path
        self.method = method
        self.requires_auth = requires_auth


def route(blueprint, endpoint: Endpoint):
    """Register a view for ``endpoint`` on ``blueprint``, enforcing its method and auth."""

    def decorator(view):
        view_func = login_required(view) if endpoint.requires_auth else view
        blueprint.add_url_rule(
            endpoint.path,
            endpoint=endpoint.name.lower(),
            view_func=view_func,
            methods=[endpoint.method],
        )
        return view

    return decorator
