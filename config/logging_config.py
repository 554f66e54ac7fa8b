import logging
import logging.config
from config.main_config import Config


class UserFilter(logging.Filter):
    def filter(self, record):
        if not getattr(record, 'user', None):
            record.user = 'ANONYMOUS'  # Requests without a valid token
        return True


def _logger(level: str) -> dict:
    return {
        'handlers': ['console'],
        'level': level,
        'propagate': False,
    }


# Lambda forwards stdout to CloudWatch, so there is no file handler
logging_config = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(user)s - %(message)s'
        },
    },
    'filters': {
        'user_filter': {
            '()': UserFilter,
        },
    },
    'handlers': {
        'console': {
            'level': Config.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'filters': ['user_filter']
        },
    },
    'loggers': {
        'use_cases': _logger(Config.LOG_LEVEL),
        'handlers': _logger(Config.LOG_LEVEL),
        'repositories': _logger(Config.LOG_LEVEL),
        'external_apis': _logger(Config.LOG_LEVEL),
        'utils': _logger(Config.LOG_LEVEL),
        '': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        }
    }
}

logging.config.dictConfig(logging_config)
