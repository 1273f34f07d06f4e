"""Validators run over already assembled benchmark cases."""

from .awaiting import close_thread_loop, discard, get_result, is_deferred
from .execution import ExecutionValidator, ReturnValueValidator, bind_parameter
from .models import ValidationError, ValidationParameters, has_critical, raise_for_errors

__all__ = [
	"close_thread_loop",
	"discard",
	"get_result",
	"is_deferred",
	"ExecutionValidator",
	"ReturnValueValidator",
	"bind_parameter",
	"ValidationError",
	"ValidationParameters",
	"has_critical",
	"raise_for_errors",
]
