# games/titans/engine/__init__.py
