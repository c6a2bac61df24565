# social_api/repositories/base.py

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from social_api.core.errors import Internal

logger = logging.getLogger(__name__)


def store_operation(func):
    """Roll back and report any database failure as Internal."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Store operation %s.%s failed", type(self).__name__, func.__name__)
            raise Internal()

    return wrapper


class Repository:

    def __init__(self, db: Session):
        self.db = db
