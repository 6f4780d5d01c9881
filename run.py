# run.py
from dotenv import load_dotenv
import os
import socket
import sys

# Carrega as variáveis de ambiente do arquivo .env.dev
dotenv_path = os.path.join(os.path.dirname(__file__), '.env.dev')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path, override=True)

# Em desenvolvimento o banco é sempre o SQLite local
if os.getenv('FLASK_ENV') != 'production':
    os.environ.pop('DATABASE_URL', None)


def check_port_available(port):
    """Verifica se a porta está disponível"""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(('127.0.0.1', port))
            return True
    except OSError:
        return False


from config import DevelopmentConfig  # noqa: E402
from gestao_merenda import create_app, db  # noqa: E402

app = create_app(DevelopmentConfig)


@app.cli.command('criar-admin')
def criar_admin():
    """Cria as tabelas e o usuário admin inicial (ADMIN_USER / ADMIN_PASSWORD)."""
    from gestao_merenda.models import Usuario

    db.create_all()
    nome = os.getenv('ADMIN_USER', 'admin')
    if Usuario.query.filter_by(nome=nome).first():
        print(f"Usuário {nome} já existe.")
        return
    senha = os.getenv('ADMIN_PASSWORD')
    if not senha:
        print("Defina ADMIN_PASSWORD para criar o usuário admin.")
        sys.exit(1)
    usuario = Usuario(nome=nome, perfil='admin')
    usuario.set_senha(senha)
    db.session.add(usuario)
    db.session.commit()
    print(f"Usuário {nome} criado.")


if __name__ == "__main__":
    PORT = int(os.getenv('PORT', '5004'))
    HOST = "127.0.0.1"

    # O processo filho do reloader não precisa verificar a porta
    is_reloader_process = os.environ.get('WERKZEUG_RUN_MAIN') == 'true'

    if not is_reloader_process and not check_port_available(PORT):
        print(f"\nERRO: Porta {PORT} já está em uso!")
        print(f"Encerre o processo com: lsof -ti:{PORT} | xargs kill -9\n")
        sys.exit(1)

    if not is_reloader_process:
        print("\nIniciando servidor Flask...")
        print(f"   URL: http://{HOST}:{PORT}\n")

    app.run(host=HOST, port=PORT, debug=True, use_reloader=True, threaded=True)
