"""Entry point wrapper for ``python -m melody_composer``.

Execution is forwarded to :func:`melody_composer.main` so ``python -m`` and the
installed ``melody-composer`` console script behave identically.

Example
-------
Print a seeded sixteen-note melody in D dorian::

    python -m melody_composer --key D --scale dorian --seed 3
"""

from . import main

if __name__ == "__main__":
    main()
