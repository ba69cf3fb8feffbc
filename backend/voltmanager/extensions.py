# Overview: Flask extension instance for the record store.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
