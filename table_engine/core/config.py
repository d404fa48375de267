"""Table configuration."""

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidPageSizeError

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 25, 50, 100)


@dataclass(frozen=True)
class TableConfig:
    """
    Static configuration of a table instance.

    Attributes:
        page_size: Initial rows per page
        page_size_options: Allow-list of page sizes a caller may switch to
        pagination: When False the whole filtered, sorted dataset is one page
    """

    page_size: int = DEFAULT_PAGE_SIZE
    page_size_options: Tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS
    pagination: bool = True

    def __post_init__(self):
        object.__setattr__(self, "page_size_options", tuple(self.page_size_options))
        self.validate()

    def validate(self) -> None:
        """
        Check page size settings.

        Raises:
            InvalidPageSizeError: If any size is not a positive integer, or
                the default size is not one of the options
        """
        for size in (self.page_size,) + self.page_size_options:
            if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
                raise InvalidPageSizeError(
                    f"Page sizes must be positive integers, got {size!r}"
                )
        if self.page_size_options and self.page_size not in self.page_size_options:
            raise InvalidPageSizeError(
                f"Default page size {self.page_size} is not one of "
                f"{list(self.page_size_options)}"
            )
