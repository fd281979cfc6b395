"""
Django Models para o domínio de Utilizadores.

Guarda apenas o que o ciclo de vida dos tickets consulta: perfil e
estado da conta. Autenticação fica fora deste model.
"""

from django.db import models


class PerfilChoices(models.TextChoices):
    """Choices para perfil (espelha PerfilUtilizador do Core)."""
    COLABORADOR = 'Colaborador', 'Colaborador'
    TECNICO = 'Técnico', 'Técnico'
    ADMINISTRADOR = 'Administrador', 'Administrador'


class UtilizadorModel(models.Model):
    """
    Model Django para persistência de Utilizadores.

    Fields:
        id: Identificador textual (partilhado com os tickets)
        username: Nome de login (único)
        nome_completo: Nome para relatórios
        email: Email de contacto
        perfil: Perfil (choices)
        ativo: Se a conta está ativa
        criado_em: Data de registo
    """

    id = models.CharField(max_length=100, primary_key=True)

    username = models.CharField(max_length=150, unique=True)
    nome_completo = models.CharField(max_length=200, blank=True, default='')
    email = models.EmailField(blank=True, default='')

    perfil = models.CharField(
        max_length=20,
        choices=PerfilChoices.choices,
        default=PerfilChoices.COLABORADOR,
        db_index=True,
    )
    ativo = models.BooleanField(default=True)
    criado_em = models.DateTimeField()

    class Meta:
        db_table = 'utilizadores'
        verbose_name = 'Utilizador'
        verbose_name_plural = 'Utilizadores'
        ordering = ['username']

    def __str__(self):
        return f"{self.username} ({self.perfil})"
