"""Flask blueprints for the backend API and the web app."""
