# games/titans/content/__init__.py
