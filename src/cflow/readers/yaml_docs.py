"""
YAML opener: one record per document in a multi-document stream.

    --- {id: 1}
    --- {id: 2}

yields two records. Documents are parsed with yaml.safe_load_all.
"""

from __future__ import annotations

from typing import Optional

import yaml

from cflow.model import OpenOptions
from .streams import PathLike, RecordStream, open_file


def open_yaml_documents(path: PathLike, options: OpenOptions) -> Optional[RecordStream]:
    handle = open_file(path, options)
    if handle is None:
        return None
    return RecordStream(path, handle, yaml.safe_load_all(handle),
                        read_errors=(OSError, UnicodeDecodeError, yaml.YAMLError))
