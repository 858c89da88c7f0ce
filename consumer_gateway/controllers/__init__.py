"""
Request controllers for the gateway.

:mod:`.consumers` implements the consumer lifecycle on the backend API;
:mod:`.web` serves the web app by proxying to that API.
"""
