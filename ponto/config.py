import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    LOGIN_USERNAME = os.getenv('LOGIN_USERNAME', 'admin')
    LOGIN_PASSWORD = os.getenv('LOGIN_PASSWORD', 'admin')
    UPLOAD_FOLDER = os.getenv(
        'UPLOAD_FOLDER',
        os.path.join(os.path.dirname(os.path.dirname(__file__)), 'uploads'),
    )
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_MB', '32')) * 1024 * 1024

    # Processing defaults, overridable per request
    SHIFT_THRESHOLD_HOURS = float(os.getenv('SHIFT_THRESHOLD_HOURS', '5'))
    LUNCH_MIN_MINUTES = float(os.getenv('LUNCH_MIN_MINUTES', '45'))
    LUNCH_MAX_MINUTES = float(os.getenv('LUNCH_MAX_MINUTES', '75'))
    DEFAULT_LUNCH_MINUTES = float(os.getenv('DEFAULT_LUNCH_MINUTES', '60'))
    MAX_SHIFT_HOURS = float(os.getenv('MAX_SHIFT_HOURS', '16'))
    SHIFT_BANDS = os.getenv('SHIFT_BANDS', '1st shift=05:00,2nd shift=13:00,3rd shift=21:00')
