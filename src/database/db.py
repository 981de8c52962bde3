from sqlalchemy.orm import declarative_base

# Shared declarative base for every table of the portfolio schema
Base = declarative_base()
