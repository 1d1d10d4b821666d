"""Process-wide redis connection, shared by every request handler."""

from flask import current_app
import redis


class Store:
    """Flask extension holding the redis client for an application.

    The client is created once per app and reused across concurrent requests;
    redis-py keeps its own connection pool. Responses are decoded to str.
    """

    def __init__(self, app=None, client=None):
        if app is not None:
            self.init_app(app, client=client)

    def init_app(self, app, client=None):
        if client is None:
            client = redis.from_url(app.config['REDIS_URL'], decode_responses=True)
        app.extensions['redis'] = client

    @property
    def client(self) -> redis.Redis:
        return current_app.extensions['redis']
