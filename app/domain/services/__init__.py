"""Servicios de dominio: reglas puras sin acceso a infraestructura."""
