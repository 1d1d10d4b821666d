from flask import Blueprint, current_app, request

from ladder.api import envelope, json_body
from ladder.endpoints import Endpoint, route
from ladder.errors import InvalidArgument
from ladder.services import account_directory, leaderboard as build_leaderboard
from ladder.services.pagination import parse_positive_int
from ladder.services.simulation import simulate_matches

leaderboard = Blueprint('leaderboard', __name__)


@route(leaderboard, Endpoint.RECORD_MATCH_RESULT)
def match_result():
    data = json_body()
    points1, points2 = build_leaderboard().settle_match(
        data.get('userid1'),
        data.get('userid2'),
        data.get('score1'),
        data.get('score2'),
    )
    return envelope({'points1': points1, 'points2': points2})


@route(leaderboard, Endpoint.GET_LEADERBOARD_PAGE)
def leaderboard_page():
    entries = build_leaderboard().page(request.args.get('page'), request.args.get('count'))
    return envelope([e.to_dict() for e in entries])


@route(leaderboard, Endpoint.RUN_SIMULATION)
def simulation():
    user_count = parse_positive_int(request.args.get('usercount'))
    max_players = int(current_app.config.get('SIMULATION_MAX_PLAYERS', 50))
    if user_count is None or user_count > max_players:
        raise InvalidArgument('Invalid user count')
    outcome = simulate_matches(account_directory(), build_leaderboard(), user_count)
    current_app.logger.info(f"[simulation] players={user_count} matches={len(outcome['matches'])}")
    return envelope({**outcome, 'message': 'Simulation completed successfully'})
