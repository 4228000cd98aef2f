"""Service layer: business operations over the SQLAlchemy session."""
