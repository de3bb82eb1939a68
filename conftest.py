# Having a conftest.py here puts the project root on sys.path, so that pytest can
# import proctl from test/ without installing it first.
