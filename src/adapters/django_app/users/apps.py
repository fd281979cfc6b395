"""
Configuração do Django App para Utilizadores.
"""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Configuração do app Utilizadores (colaboradores e técnicos)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.users'
    label = 'users'
    verbose_name = 'Utilizadores'
