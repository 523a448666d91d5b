#!/usr/bin/env python3
"""
Run the CanLedger test suite.

    python run_tests.py                 # everything
    python run_tests.py --ledger        # running-balance tests (marker: ledger)
    python run_tests.py --api           # route tests (marker: api)
    python run_tests.py --module bills  # tests/test_bills_routes.py
    python run_tests.py -k rechain -x   # pattern, stop at first failure
    python run_tests.py --coverage      # with a coverage report
"""

import argparse
import os
import subprocess
import sys

MODULES = {
    'ledger': 'test_ledger_service.py',
    'daily': 'test_daily_update_routes.py',
    'bills': 'test_bills_routes.py',
    'customers': 'test_customers_routes.py',
    'orders': 'test_orders_routes.py',
    'settings': 'test_settings_routes.py',
    'dashboard': 'test_dashboard_routes.py',
    'errors': 'test_error_handling.py',
}


def build_command(args):
    cmd = [sys.executable, '-m', 'pytest', '-vv' if args.verbose else '-v']

    if args.ledger:
        cmd += ['-m', 'ledger']
    elif args.api:
        cmd += ['-m', 'api']

    if args.module:
        cmd.append(os.path.join('tests', MODULES.get(args.module, f'test_{args.module}.py')))
    if args.test:
        cmd += ['-k', args.test]
    if args.fail_fast:
        cmd.append('-x')
    if args.coverage:
        cmd += ['--cov=canledger', '--cov-report=term-missing']

    return cmd


def main():
    parser = argparse.ArgumentParser(description='Run tests for the CanLedger API')
    marker = parser.add_mutually_exclusive_group()
    marker.add_argument('--ledger', action='store_true', help='Running-balance tests only')
    marker.add_argument('--api', action='store_true', help='Route tests only')
    parser.add_argument('--module', help=f"One test module ({', '.join(MODULES)})")
    parser.add_argument('-k', '--test', help='Only tests matching this expression')
    parser.add_argument('-x', '--fail-fast', action='store_true', help='Stop on first failure')
    parser.add_argument('-v', '--verbose', action='store_true', help='Extra pytest output')
    parser.add_argument('--coverage', action='store_true', help='Report coverage of canledger')
    args = parser.parse_args()

    cmd = build_command(args)
    print(' '.join(cmd))
    sys.exit(subprocess.call(cmd, cwd=os.path.dirname(os.path.abspath(__file__))))


if __name__ == '__main__':
    main()
