"""Reading and writing gcov coverage notes and data files.

Modules: constants, records, ids, vfile, histogram, reader, writer, gcovfile.
"""

__version__ = "0.1.0"
__all__ = [
    "constants",
    "records",
    "ids",
    "vfile",
    "histogram",
    "reader",
    "writer",
    "gcovfile",
]