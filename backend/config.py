import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    REDIS_URL = os.environ.get('REDIS_URL') or 'redis://localhost:6379/0'
    # Bearer token lifetime (seconds)
    TOKEN_TTL_SEC = int(os.environ.get('TOKEN_TTL_SEC', '86400'))
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
    # Leaderboard paging falls back to these on invalid input
    LEADERBOARD_DEFAULT_PAGE = int(os.environ.get('LEADERBOARD_DEFAULT_PAGE', '1'))
    LEADERBOARD_DEFAULT_COUNT = int(os.environ.get('LEADERBOARD_DEFAULT_COUNT', '10'))
    # Upper bound for /simulation?usercount=
    SIMULATION_MAX_PLAYERS = int(os.environ.get('SIMULATION_MAX_PLAYERS', '50'))
    CORS_ORIGINS = [
        origin.strip()
        for origin in (os.environ.get('CORS_ORIGINS') or 'http://localhost:5173,http://127.0.0.1:5173').split(',')
        if origin.strip()
    ]
