"""Django project package for the hospital records API."""
