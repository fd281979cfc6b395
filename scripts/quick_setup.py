#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria o schema na base de dados SQLite
3. Cria utilizadores e tickets de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
    python scripts/quick_setup.py --check-only
"""

import os
import sys
import argparse

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def create_schema():
    """Cria as tabelas dos apps (sem ficheiros de migração)."""
    from django.core.management import call_command

    print("📦 Criando tabelas...")
    call_command('migrate', run_syncdb=True, verbosity=1)
    print("✅ Schema pronto!")


SAMPLE_USERS = [
    ('colab-001', 'joana', 'Joana Silva', 'Colaborador'),
    ('colab-002', 'rui', 'Rui Costa', 'Colaborador'),
    ('tec-001', 'ana', 'Ana Pereira', 'Técnico'),
    ('tec-002', 'miguel', 'Miguel Santos', 'Técnico'),
    ('admin-001', 'admin', 'Administrador', 'Administrador'),
]


def create_sample_users():
    """Cria colaboradores, técnicos e um administrador."""
    from src.core.users.entities import UserEntity, PerfilUtilizador
    from src.config.container import get_container

    directory = get_container().user_directory()

    print("👤 Criando utilizadores de exemplo...")
    for user_id, username, nome, perfil in SAMPLE_USERS:
        directory.save(UserEntity(
            id=user_id,
            username=username,
            nome_completo=nome,
            email=f"{username}@example.com",
            perfil=PerfilUtilizador.from_string(perfil),
        ))
        print(f"   ✓ {username} ({perfil})")


def create_sample_tickets():
    """Cria tickets de exemplo e percorre parte do ciclo de vida."""
    from src.config.container import get_container

    gestao = get_container().gestao_tickets_service()

    print("📝 Criando tickets de exemplo...")

    criados = [
        gestao.criar_ticket_hardware('colab-001', 'Servidor de ficheiros', 'Servidor não liga após falha de energia'),
        gestao.criar_ticket_hardware('colab-002', 'Impressora 2º piso', 'Papel encravado constantemente'),
        gestao.criar_ticket_software('colab-001', 'ERP', 'Erro crítico ao emitir faturas em produção'),
        gestao.criar_ticket_software('colab-002', 'Office', 'Instalar suplemento de assinatura digital'),
        gestao.criar_ticket_hardware('colab-001', 'Portátil', 'Teclado com teclas a falhar'),
    ]

    for resultado in criados:
        if not resultado.success:
            print(f"   ✗ {resultado.error_message}")
            continue
        ticket = resultado.data
        marca = ' [URGENTE]' if ticket.urgente else ''
        print(f"   ✓ #{ticket.id} {ticket.tipo}: {ticket.informacao_especifica[:50]}{marca}")

    ids = [r.data.id for r in criados if r.success]
    if len(ids) >= 3:
        gestao.atender_ticket(ids[0], 'tec-001')
        gestao.concluir_atendimento(
            ids[0], 'tec-001', 'Resolvido',
            'Fonte de alimentação substituída', pecas='Fonte 750W'
        )
        gestao.atender_ticket(ids[2], 'tec-002')

    print(f"✅ {len(ids)} tickets criados!")


def check_connection():
    """Verifica conexão com a base de dados."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("🔍 Verificando conexão com a base de dados...")

    info = check_database_connection()
    if info['healthy']:
        print(f"✅ Conexão OK! ({info['engine']}: {info['database']})")
        return True

    print(f"❌ Erro de conexão: {info['error']}")
    return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Estratégia de atendimento: {settings.ESTRATEGIA_ATENDIMENTO_PADRAO}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=src.config.settings --pythonpath=.")
    print("   2. Aceda a: http://localhost:8000/api/tickets/")
    print("   3. Aceda a: http://localhost:8000/api/tickets/estatisticas/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar utilizadores e tickets de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Helpdesk de Tickets - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que a base de dados está acessível.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    create_schema()

    if args.with_sample_data:
        create_sample_users()
        create_sample_tickets()

    show_info()


if __name__ == '__main__':
    main()
