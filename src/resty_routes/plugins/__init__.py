"""Plugin package for Resty Routes.

Note: Do not import concrete plugins here to keep imports side-effect free.
Concrete plugin modules self-register when imported via the main
resty_routes package.
"""

__all__: list[str] = []
