"""filenext — lazy, archive-aware directory tree iterators."""

__version__ = "0.1.0"


class FileNextError(Exception):
    """Traversal aborted.

    Raised by the default error handler for unreadable directories,
    failed archive extractions and invalid options. Pass your own
    ``error_handler`` to record these and carry on instead.
    """


from filenext.expander import FilterContext  # noqa: E402
from filenext.iterator import Found, Traversal, dirs, everything, files  # noqa: E402
from filenext.options import TraversalOptions, sort_reverse, sort_standard  # noqa: E402
from filenext.paths import reslash  # noqa: E402

__all__ = [
    "FileNextError",
    "FilterContext",
    "Found",
    "Traversal",
    "TraversalOptions",
    "__version__",
    "dirs",
    "everything",
    "files",
    "reslash",
    "sort_reverse",
    "sort_standard",
]
