from .exceptions import ValidationError, OperationFailed, store_failure
from .auth_service import TokenVerificationError, bearer_token, verify_token
