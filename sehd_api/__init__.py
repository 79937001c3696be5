"""SEHD admissions API: departments, programs, terms and admission statistics."""
