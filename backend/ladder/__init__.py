from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import click
from config import Config

from ladder.store import Store

bcrypt = Bcrypt()
login_manager = LoginManager()
store = Store()


def create_app(config_class=Config, redis_client=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    store.init_app(flask_app, client=redis_client)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    from ladder.main import main
    flask_app.register_blueprint(main)

    from ladder.api.friendship import friendship
    flask_app.register_blueprint(friendship)

    from ladder.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard)

    from ladder.errors import ServiceError, Unauthenticated
    from ladder.models import Principal
    from ladder.services import token_store

    # Bearer tokens only: every request is authenticated from its header
    @login_manager.request_loader
    def load_principal(request):
        header = request.headers.get('Authorization')
        if not header:
            return None
        try:
            return Principal(id=token_store().resolve(header))
        except Unauthenticated:
            flask_app.logger.info(f"[auth] rejected token for {request.path}")
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return _error_envelope(Unauthenticated.default_message, 401)

    @flask_app.errorhandler(ServiceError)
    def handle_service_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {exc.message}")
        return _error_envelope(exc.message, exc.status_code)

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return _error_envelope(exc.description if exc.code == 400 else exc.name, exc.code)

    @click.command('simulate-matches')
    @click.argument('player_count', type=click.IntRange(min=1))
    def simulate_matches_command(player_count):
        """Registers player_1..player_N if needed and plays a scored round robin."""
        from ladder.services import account_directory, leaderboard
        from ladder.services.simulation import simulate_matches
        with flask_app.app_context():
            outcome = simulate_matches(account_directory(), leaderboard(), player_count)
            click.echo(f"Simulated {len(outcome['matches'])} matches between {player_count} players.")
            if outcome['skipped']:
                click.echo(f"Skipped unresolvable players: {', '.join(outcome['skipped'])}")

    @click.command('reconcile-accounts')
    def reconcile_accounts_command():
        """Restores username index entries missing for stored accounts."""
        from ladder.services import account_directory
        with flask_app.app_context():
            report = account_directory().reconcile()
            click.echo(
                f"repaired={report['repaired']} conflicts={report['conflicts']} malformed={report['malformed']}"
            )

    flask_app.cli.add_command(simulate_matches_command)
    flask_app.cli.add_command(reconcile_accounts_command)

    return flask_app


def _error_envelope(message, code):
    return jsonify({'status': False, 'result': None, 'message': message}), code
