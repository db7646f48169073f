"""Event context inference around a detected date: titles, descriptions, locations."""
