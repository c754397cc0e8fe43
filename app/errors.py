# app/errors.py
# Role: Error taxonomy shared by the services and the HTTP layer.

"""
Domain errors.

- ValidationError: malformed input (bad recurrence definition, non-positive
  amount). Raised before anything is written.
- NotFoundError: the referenced transaction or series does not exist for
  this user.
- ConflictError: a category or source with that name already exists.
- StoreError: the database failed a read or write. The batch was rolled
  back, so no partial state is visible.
"""


class FinanceError(Exception):
    """Base class for errors raised by the services."""


class ValidationError(FinanceError):
    pass


class NotFoundError(FinanceError):
    pass


class StoreError(FinanceError):
    pass


class ConflictError(FinanceError):
    pass
