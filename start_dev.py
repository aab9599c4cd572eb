#!/usr/bin/env python3
"""
SME Health Assessment - Development Server Launcher

Checks the environment, validates the question catalog, optionally scores
and stores the demo profiles, then runs the Flask development server.

Usage:
    python start_dev.py                 # Validate catalog and start server
    python start_dev.py --demo          # Store demo assessments first
    python start_dev.py --score-demos   # Print demo scores and exit
    python start_dev.py --port 8080     # Use custom port
"""

import os
import sys
import argparse
import subprocess
from pathlib import Path

ROOT = Path(__file__).parent
REQUIRED_MODULES = ('flask', 'flask_sqlalchemy', 'flask_limiter', 'numpy')


class Colors:
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    BOLD = '\033[1m'
    END = '\033[0m'


RISK_COLORS = {
    'Critical Risk': Colors.RED,
    'High Risk': Colors.YELLOW,
    'Moderate Risk': Colors.CYAN,
    'Low Risk': Colors.GREEN
}


def print_banner():
    print(f"""
{Colors.GREEN}{'=' * 62}
  {Colors.BOLD}SME Health Assessment{Colors.END}{Colors.GREEN}
  {Colors.CYAN}Business health scoring and compound risk detection{Colors.GREEN}
{'=' * 62}{Colors.END}
""")


def print_step(label, message, status):
    icons = {
        'done': f"{Colors.GREEN}✓{Colors.END}",
        'skip': f"{Colors.BLUE}→{Colors.END}",
        'error': f"{Colors.RED}✗{Colors.END}"
    }
    print(f"  {icons.get(status, '-')} {label}: {message}")


def missing_modules():
    """Required modules that cannot be imported"""
    missing = []
    for module in REQUIRED_MODULES:
        try:
            __import__(module)
        except ImportError:
            missing.append(module)
    return missing


def install_project():
    """pip install -e the project with its dependencies"""
    subprocess.check_call([sys.executable, '-m', 'pip', 'install', '-e', str(ROOT), '-q'])


def configure_environment():
    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('FLASK_APP', 'sme_health.web.app:create_app')

    instance_dir = ROOT / 'instance'
    instance_dir.mkdir(exist_ok=True)
    os.environ.setdefault('DATABASE_URL', f"sqlite:///{instance_dir / 'sme_health.db'}")


def check_catalog():
    """Validate the default catalog; returns the number of questions"""
    from sme_health.assessment.questions import ASSESSMENT_QUESTIONS
    from sme_health.assessment.validation import validate_catalog

    validate_catalog(ASSESSMENT_QUESTIONS)
    return len(ASSESSMENT_QUESTIONS)


def print_demo_scores():
    """Score each demo profile and print a one-line summary"""
    from sme_health.assessment.assessment_engine import AssessmentEngine
    from sme_health.demo_data import DEMO_PROFILES, get_demo_answers

    engine = AssessmentEngine()
    for key, profile in DEMO_PROFILES.items():
        result = engine.calculate_score(get_demo_answers(key))
        color = RISK_COLORS.get(result.risk_level.value, Colors.END)
        risks = ', '.join(r.id for r in result.compound_risks) or 'none'
        print(f"    {Colors.BOLD}{profile['name']}{Colors.END}: "
              f"score {result.overall_score}, "
              f"{color}{result.risk_level.value}{Colors.END}, "
              f"funding {result.funding_readiness.tier}, "
              f"compound risks: {risks}")


def store_demo_assessments(app):
    """Store the demo profiles unless results already exist"""
    from sme_health.database.models import db, AssessmentRecord
    from sme_health.demo_data import load_demo_assessments

    with app.app_context():
        existing = AssessmentRecord.query.count()
        if existing:
            print(f"    {Colors.CYAN}{existing} assessments already stored{Colors.END}")
            return existing
        return len(load_demo_assessments(db.session, engine=app.extensions['assessment_engine']))


def parse_args():
    parser = argparse.ArgumentParser(description='SME Health Assessment development server')
    parser.add_argument('--demo', action='store_true',
                        help='Store the demo assessments before starting')
    parser.add_argument('--score-demos', action='store_true',
                        help='Print the demo profile scores and exit')
    parser.add_argument('--port', type=int, default=5101,
                        help='Port to run server on (default: 5101)')
    parser.add_argument('--host', default='127.0.0.1',
                        help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--skip-install', action='store_true',
                        help='Do not install missing dependencies')
    return parser.parse_args()


def main():
    args = parse_args()
    print_banner()

    if sys.version_info < (3, 9):
        print_step('Python', f"3.9+ required, found {sys.version_info.major}.{sys.version_info.minor}", 'error')
        sys.exit(1)

    missing = missing_modules()
    if not missing:
        print_step('Dependencies', 'installed', 'done')
    elif args.skip_install:
        print_step('Dependencies', f"missing {', '.join(missing)}", 'error')
        sys.exit(1)
    else:
        try:
            install_project()
        except subprocess.CalledProcessError as e:
            print_step('Dependencies', f"install failed: {e}", 'error')
            sys.exit(1)
        print_step('Dependencies', f"installed {', '.join(missing)}", 'done')

    configure_environment()

    from sme_health.assessment.validation import CatalogValidationError
    try:
        count = check_catalog()
    except CatalogValidationError as e:
        print_step('Catalog', f"{len(e.problems)} problems", 'error')
        for problem in e.problems:
            print(f"    {Colors.RED}{problem}{Colors.END}")
        sys.exit(1)
    print_step('Catalog', f"{count} questions valid", 'done')

    if args.score_demos:
        print_demo_scores()
        return

    from sme_health.web.app import create_app
    app = create_app()

    if args.demo:
        stored = store_demo_assessments(app)
        print_step('Demo data', f"{stored} assessments available", 'done')
    else:
        print_step('Demo data', 'skipped (use --demo to store)', 'skip')

    print(f"\n  {Colors.BOLD}Health check: {Colors.CYAN}http://{args.host}:{args.port}/api/health{Colors.END}\n")
    try:
        app.run(debug=True, port=args.port, host=args.host)
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Server stopped.{Colors.END}")


if __name__ == '__main__':
    main()
