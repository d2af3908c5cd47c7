import os

# Keep tests off the user's real route file.
os.environ.setdefault("ROUTE_SKETCH_STORE_PATH", "memory")
