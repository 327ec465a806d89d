"""imagegen interface adapter package.

Architectural role:
- Defines the command-line boundary: argument parsing, operator output,
  and conversion of errors into exit codes.
- Delegates generation to `imagegen.image.service`.
"""
