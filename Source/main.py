"""
Splitt - Shared Bill Splitter

python3 main.py                              # Interactive CLI mode
python3 main.py --receipt receipt.jpg        # Import a receipt and start CLI
python3 main.py --quick                      # Quick mode - just show the split
python3 main.py --help                       # Show help
"""

import sys
import logging
import argparse

from bill_store import BillStore
from cli_interface import SplittCLI
from config import LOG_LEVEL, RECEIPT_ENDPOINT, STATE_FILE
from constants import VERSION
from data_models import SplitMode
from persistence import BillRepository
from receipt_import import ReceiptImportClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Splitt - Shared Bill Splitter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                            # Interactive mode
  python main.py --receipt receipt.jpg      # Import receipt then interactive
  python main.py --quick                    # Show the saved bill's split only
  python main.py --tax-mode even            # Split tax evenly
        """
    )

    parser.add_argument(
        '--state',
        default=STATE_FILE,
        help=f'Bill state file (default: {STATE_FILE})'
    )
    parser.add_argument(
        '--receipt',
        help='Receipt image to import'
    )
    parser.add_argument(
        '--endpoint',
        default=RECEIPT_ENDPOINT,
        help='Receipt-parsing service URL'
    )
    parser.add_argument(
        '--tax-mode',
        choices=[mode.value for mode in SplitMode],
        help='How tax is split'
    )
    parser.add_argument(
        '--tip-mode',
        choices=[mode.value for mode in SplitMode],
        help='How tip is split'
    )
    parser.add_argument(
        '--quick',
        action='store_true',
        help='Quick mode - show the bill and split, then exit'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Debug logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'Splitt {VERSION}'
    )
    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    repository = BillRepository(args.state)
    store = BillStore(repository.load())

    with ReceiptImportClient(endpoint=args.endpoint) as client:
        cli = SplittCLI(store, repository, client)

        if args.tax_mode:
            store.set_tax_mode(SplitMode.parse(args.tax_mode))
        if args.tip_mode:
            store.set_tip_mode(SplitMode.parse(args.tip_mode))

        if args.receipt:
            cli.import_receipt(args.receipt)

        if args.quick:
            cli.display_bill()
            cli.display_split()
            return

        cli.run()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ An error occurred: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
