#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
HESTON PROCESS - Application Entry Point
═══════════════════════════════════════════════════════════════════════════════

Usage:
    python -m heston_process.run              # Start web server
    python -m heston_process.run --test       # Run validation tests only
    python -m heston_process.run --demo       # Run demo calculations

Mathematical Model:
    d ln S = (r - q - V/2)dt + √V dW_1
    dV     = κ(θ - V)dt + σ√V dW_2
    Corr(dW_1, dW_2) = ρ

═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import argparse


def run_demo():
    """Run demonstration calculations."""

    print("=" * 70)
    print("HESTON PROCESS - DEMO")
    print("=" * 70)
    print()

    import datetime
    import numpy as np
    from heston_process.backend.core.parameters import get_default_params, build_process
    from heston_process.backend.solvers.monte_carlo import MonteCarloSimulator

    params = get_default_params()
    reference_date = datetime.date.today()
    process = build_process(params, reference_date)

    print("Heston Parameters:")
    print(f"  κ (kappa)  = {params.kappa}")
    print(f"  θ (theta)  = {params.theta}")
    print(f"  σ (sigma)  = {params.sigma}")
    print(f"  ρ (rho)    = {params.rho}")
    print(f"  r          = {params.r}")
    print(f"  q          = {params.q}")
    print(f"  S₀         = {params.S0}")
    print(f"  V₀         = {params.V0}")
    print(f"  Feller     = {params.feller_ratio:.2f} {'✓' if params.feller_satisfied else '✗'}")
    print()

    x0 = process.initial_values()
    print("1. PROCESS PRIMITIVES")
    print(f"   initial_values()    = {x0}")
    print(f"   drift(0, x0)        = {process.drift(0.0, x0)}")
    print(f"   diffusion(0, x0)    =")
    for row in process.diffusion(0.0, x0):
        print(f"      {row}")

    print("\n2. VARIANCE FLOOR (x = [100, -0.01])")
    x_neg = np.array([100.0, -0.01])
    print(f"   drift               = {process.drift(0.0, x_neg)}")
    print(f"   diffusion row 0     = {process.diffusion(0.0, x_neg)[0]}")

    print("\n3. LIVE PARAMETERS")
    process.v0().current_link().set_value(0.09)
    print(f"   v0 -> 0.09: initial_values() = {process.initial_values()}")
    process.v0().current_link().set_value(params.V0)

    one_year = reference_date + datetime.timedelta(days=365)
    print(f"\n4. TIME MAPPING: time({one_year}) = {process.time(one_year):.4f}")

    print("\n5. PATH EVOLUTION (Euler, full truncation, 1,000 paths x 252 steps)")
    mc = MonteCarloSimulator(process)
    S_paths, V_paths = mc.simulate_paths(T=1.0, N_steps=252, N_paths=1000, seed=42)
    print(f"   min S_T             = {S_paths[:, -1].min():.4f}")
    print(f"   min V (raw state)   = {V_paths.min():.6f}")

    print()
    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


def run_tests():
    """Run validation tests."""
    from heston_process.tests.validation import run_all_tests
    success = run_all_tests()
    return 0 if success else 1


def run_server(host='0.0.0.0', port=5000, debug=True):
    """Start the web server."""
    from heston_process.backend.app import app
    app.run(host=host, port=port, debug=debug)


def main():
    parser = argparse.ArgumentParser(
        description='Heston Stochastic Volatility Process',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m heston_process.run              Start web server at http://localhost:5000
    python -m heston_process.run --port 8000  Start on custom port
    python -m heston_process.run --test       Run validation tests
    python -m heston_process.run --demo       Run demo calculations
        """
    )

    parser.add_argument('--test', action='store_true', help='Run validation tests')
    parser.add_argument('--demo', action='store_true', help='Run demo calculations')
    parser.add_argument('--host', default='0.0.0.0', help='Server host (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=5000, help='Server port (default: 5000)')
    parser.add_argument('--no-debug', action='store_true', help='Disable debug mode')

    args = parser.parse_args()

    if args.test:
        sys.exit(run_tests())
    elif args.demo:
        run_demo()
    else:
        run_server(args.host, args.port, not args.no_debug)


if __name__ == '__main__':
    main()
