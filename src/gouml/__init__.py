"""gouml - structural model extractor for Go source trees.

gouml walks a Go source tree, classifies every top-level type and function
declaration, binds methods to their receiver types and emits one
deterministic JSON document describing packages, types, fields, methods and
functions. The document feeds documentation generators, diagram renderers
and architecture checks.

Core principles:
- Syntactic only: declarations are recorded as written, nothing is type-checked
- Deterministic: the same tree always serializes to the same bytes
- Fail fast: malformed source or module files abort the run
"""

__version__ = "0.1.0"
__author__ = "gouml Contributors"
