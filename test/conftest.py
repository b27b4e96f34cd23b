import os

# Plain output for assertions, even when pytest runs with -s in a terminal
os.environ.setdefault("NO_COLOR", "1")
