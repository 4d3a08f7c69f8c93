from .typing import assert_not_none, is_structured  # noqa
