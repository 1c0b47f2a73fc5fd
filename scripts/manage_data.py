#!/usr/bin/env python3
"""
Manutencao dos dados pela linha de comando (mesmas operacoes da pagina de configuracoes).

Uso:
  python scripts/manage_data.py init
  python scripts/manage_data.py export [--output arquivo.json]
  python scripts/manage_data.py import arquivo.json
  python scripts/manage_data.py restore-backup
  python scripts/manage_data.py clear --confirm
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Garantir que o pacote orgtrack seja importavel quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orgtrack.core.config import get_settings
from orgtrack.db.create_tables import init_database
from orgtrack.db.session import create_db_engine
from orgtrack.repositories.sql_storage import SQLStorage, StorageError
from orgtrack.services.errors import ServiceError
from orgtrack.services.snapshot_service import SnapshotService


def _load_json(path: Path):
    if not path.exists():
        raise SystemExit(f"Arquivo nao encontrado: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except ValueError as exc:
            raise SystemExit(f"JSON invalido em {path}: {exc}") from exc


def run(args: argparse.Namespace, storage: SQLStorage) -> None:
    snapshots = SnapshotService(storage)
    if args.command == "init":
        seeded = init_database(storage)
        print("OK: banco inicializado" + (" (dados padrao inseridos)" if seeded else ""))
    elif args.command == "export":
        init_database(storage)
        output = Path(args.output or snapshots.export_filename())
        with output.open("w", encoding="utf-8") as f:
            json.dump(snapshots.export_snapshot(), f, ensure_ascii=False, indent=2)
        print(f"OK: dados exportados para {output}")
    elif args.command == "import":
        init_database(storage)
        snapshots.import_snapshot(_load_json(Path(args.file)))
        print("OK: dados importados (backup anterior salvo)")
    elif args.command == "restore-backup":
        init_database(storage)
        if not snapshots.restore_backup():
            raise SystemExit("Nenhum backup encontrado")
        print("OK: backup restaurado")
    elif args.command == "clear":
        if not args.confirm:
            raise SystemExit("Use --confirm para apagar todos os dados")
        init_database(storage)
        snapshots.clear_all_data()
        print("OK: todos os dados removidos (backup salvo)")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Exportar/importar/limpar os dados do sistema")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="Criar tabelas e dados padrao")
    export = sub.add_parser("export", help="Exportar snapshot JSON")
    export.add_argument("--output", help="Arquivo de saida (default: sistema-gestao-backup-AAAA-MM-DD.json)")
    imp = sub.add_parser("import", help="Importar snapshot JSON (salva backup antes)")
    imp.add_argument("file", help="Arquivo JSON exportado")
    sub.add_parser("restore-backup", help="Restaurar o ultimo backup")
    clear = sub.add_parser("clear", help="Apagar todos os dados (salva backup antes)")
    clear.add_argument("--confirm", action="store_true", help="Confirma a remocao")
    args = ap.parse_args(argv)

    storage = SQLStorage(create_db_engine(get_settings().database_url))
    try:
        run(args, storage)
    except (StorageError, ServiceError) as exc:
        raise SystemExit(f"Erro: {exc}") from exc
    finally:
        storage.dispose()


if __name__ == "__main__":
    main()
