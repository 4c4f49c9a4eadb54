"""
Command-line interface for k2000.

```
$ k2000 --tree
cli
└── acquire
└── modes
└── visa
```

Examples
--------
Log resistance every half second for an hour:
```bash
$ k2000 acquire -m 2 -t 5 -T 60 -c "sample 3" run3.dat
```

Dry run without hardware:
```bash
$ k2000 acquire --mock -n -T 0.1 test.dat
```
"""

from .acquire import acquire
from .base import cli, tree_option

cli.add_command(acquire)

__all__ = ["cli", "tree_option"]
