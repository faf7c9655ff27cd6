"""CLIエントリーポイント"""
import argparse
import json
import sys

from .features.batch.orchestrator import Orchestrator
from .features.geocoding.domain.models import AddressInput
from .features.geocoding.normalization.query_builder import build_queries
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ValidationError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="店舗住所の座標解決ツール")

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="住所を座標に解決")
    resolve.add_argument("--prefecture", required=True, help="都道府県（例: 東京都）")
    resolve.add_argument("--postal-code", help="郵便番号（例: 101-0021）")
    resolve.add_argument("--city-town", help="市区町村・町域")
    resolve.add_argument("--street", help="丁目・番地")
    resolve.add_argument(
        "--dry-run",
        action="store_true",
        help="候補クエリを表示するだけでプロバイダーに問い合わせない",
    )

    postal = subparsers.add_parser("postal", help="郵便番号から住所を検索")
    postal.add_argument("postal_code", help="郵便番号")

    revalidate = subparsers.add_parser("revalidate", help="承認待ち店舗の座標を一括再解決")
    revalidate.add_argument("--no-progress", action="store_true", help="プログレスバーを表示しない")

    return parser


def main() -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗, 2: 該当なし）
    """
    args = _build_parser().parse_args()

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(
            level=settings.log_level,
            enable_cloud_logging=settings.gcp_logging_enabled,
            project_id=settings.gcp_project_id,
        )

        if args.command == "resolve":
            address = AddressInput(
                prefecture=args.prefecture,
                postal_code=args.postal_code,
                city_town=args.city_town,
                street=args.street,
            )
            if args.dry_run:
                for query in build_queries(address):
                    print(query)
                return 0

            orchestrator = Orchestrator(settings, with_storage=False)
            result = orchestrator.geocoding_service.resolve_address(address)
            if result is None:
                print("No result; place the pin manually.", file=sys.stderr)
                return 2
            print(
                json.dumps(
                    {
                        "latitude": result.latitude,
                        "longitude": result.longitude,
                        "label": result.label,
                        "provider": result.provider.value,
                    },
                    ensure_ascii=False,
                )
            )
            return 0

        if args.command == "postal":
            orchestrator = Orchestrator(settings, with_storage=False)
            postal = orchestrator.postal_client.lookup(args.postal_code)
            if postal is None:
                print("No address found.", file=sys.stderr)
                return 2
            print(
                json.dumps(
                    {
                        "postal_code": postal.postal_code,
                        "prefecture": postal.prefecture,
                        "city_town": postal.city_town,
                    },
                    ensure_ascii=False,
                )
            )
            return 0

        orchestrator = Orchestrator(settings)
        counts = orchestrator.run_revalidation(show_progress=not args.no_progress)
        print(json.dumps(counts))
        return 0

    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
