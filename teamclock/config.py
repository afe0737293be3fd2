import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Config:
    """Base configuration"""
    # Environment detection
    ENV = os.getenv('ENVIRONMENT', 'development')
    IS_PRODUCTION = ENV == 'production'

    # HTTP API settings
    API_KEY = os.getenv('API_KEY', 'dev-api-key-123')
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 5000))

    # Clockify (directory source)
    CLOCKIFY_API_KEY = os.getenv('CLOCKIFY_API_KEY')
    CLOCKIFY_BASE_URL = os.getenv('CLOCKIFY_BASE_URL', 'https://api.clockify.me/api/v1')
    CLOCKIFY_WORKSPACE_ID = os.getenv('CLOCKIFY_WORKSPACE_ID') or None

    # Supabase (relational backend)
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_SERVICE_ROLE_KEY = os.getenv('SUPABASE_SERVICE_ROLE_KEY')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')

    # Redis settings (local key-value store)
    REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
    REDIS_PORT = int(os.getenv('REDIS_PORT', 6379))
    REDIS_DB = int(os.getenv('REDIS_DB', 0))

    # Sync settings
    SYNC_INTERVAL_MINUTES = int(os.getenv('SYNC_INTERVAL_MINUTES', 30))
    RATE_LIMIT_DELAY = float(os.getenv('RATE_LIMIT_DELAY', 1.0))
    REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', 30))

    # Cache and polling
    CACHE_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', 6 * 60 * 60))
    STATUS_POLL_SECONDS = int(os.getenv('STATUS_POLL_SECONDS', 30))

    # Application settings
    TIMEZONE = os.getenv('TIMEZONE', 'America/Chicago')
    HOURS_PER_WORKDAY = 8

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'logs/teamclock.log')

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    RATE_LIMIT_DELAY = 0.0
    SUPABASE_URL = 'http://supabase.test'
    SUPABASE_SERVICE_ROLE_KEY = 'test-service-role-key'
    CLOCKIFY_API_KEY = 'test-clockify-key'

# Configuration dictionary
config_dict = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

# Get the active configuration
env = os.getenv('ENVIRONMENT', 'development')
config = config_dict.get(env, config_dict['default'])()
