#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Kanban AI - Board de tarefas com sugestões por IA
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Atalhos do Kanban AI
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # Comando de setup inicial
        if command == 'setup':
            print("🚀 Configurando Kanban AI...")

            print("📊 Aplicando migrações...")
            if os.system(f'{sys.executable} manage.py migrate') != 0:
                print("❌ Erro nas migrações")
                return

            print("📁 Coletando arquivos estáticos...")
            os.system(f'{sys.executable} manage.py collectstatic --noinput')

            print("👤 Criando usuário padrão...")
            os.system(f'{sys.executable} manage.py seed_users')

            print("🤖 Verificando servidor de LLM...")
            os.system(f'{sys.executable} manage.py check_llm')

            print("✅ Setup concluído!")
            return

        # Comando de configuração do banco
        elif command == 'setup-db':
            print("🐘 Configurando PostgreSQL...")

            commands = [
                "CREATE USER kanban_user WITH PASSWORD 'kanban123';",
                "CREATE DATABASE kanban_ai OWNER kanban_user;",
                "GRANT ALL PRIVILEGES ON DATABASE kanban_ai TO kanban_user;",
                "ALTER USER kanban_user CREATEDB;"
            ]

            for cmd in commands:
                print(f"Executando: {cmd}")
                exit_code = os.system(f'psql -U postgres -h localhost -c "{cmd}"')
                if exit_code != 0:
                    print("⚠️  Comando pode ter falhado (normal se já existir)")

            print("🧪 Testando conexão...")
            test_result = os.system('psql -U kanban_user -h localhost -d kanban_ai -c "SELECT version();"')

            if test_result == 0:
                print("✅ PostgreSQL configurado com sucesso!")
                print("📊 Execute agora: python manage.py setup")
            else:
                print("❌ Erro na configuração. Verifique se o PostgreSQL está rodando e o psql está no PATH")
            return

        # Comando de reset
        elif command == 'reset':
            confirm = input("⚠️  Isso irá apagar TODAS as tarefas e o histórico. Continuar? (y/N): ")
            if confirm.lower() == 'y':
                print("🗑️  Resetando banco de dados...")
                os.system(f'{sys.executable} manage.py flush --noinput')
                os.system(f'{sys.executable} manage.py migrate')
                os.system(f'{sys.executable} manage.py seed_users')
                print("✅ Reset concluído!")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
