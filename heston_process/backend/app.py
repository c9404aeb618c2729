"""
Flask Backend API for the Heston Process

═══════════════════════════════════════════════════════════════════════════════
REST API ENDPOINTS FOR PROCESS EVALUATION
═══════════════════════════════════════════════════════════════════════════════

Endpoints:
- GET  /api/health: Health check
- POST /api/process: Initial state and parameter diagnostics
- POST /api/process/coefficients: Drift, diffusion and step covariance at (t, x)
- POST /api/paths: Simulate raw spot/variance paths

Each request builds its own process on flat curves, so concurrent requests
share no mutable state.

═══════════════════════════════════════════════════════════════════════════════
"""

import datetime
import numpy as np
from flask import Flask, request, jsonify
from flask_cors import CORS

from heston_process.backend.core.parameters import HestonParams, build_process
from heston_process.backend.solvers.monte_carlo import MonteCarloSimulator


# simulate() steps every path in Python, so request sizes are capped
MAX_PATHS = 200
MAX_STEPS = 500

app = Flask(__name__)
CORS(app)


# ═══════════════════════════════════════════════════════════════════════════════
# UTILITY FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════

def get_json_data() -> dict:
    """Get JSON data from request with fallback to empty dict."""
    json_data = request.get_json(silent=True)
    return json_data if json_data is not None else {}


def parse_params(data: dict) -> HestonParams:
    """
    Parse HestonParams from request data.

    Expected format:
    {
        "params": {
            "kappa": float,
            "theta": float,
            "sigma": float,
            "rho": float,
            "r": float,
            "q": float,
            "S0": float,
            "V0": float
        }
    }
    """
    p = data.get('params', {})
    try:
        return HestonParams(
            kappa=float(p.get('kappa', 2.0)),
            theta=float(p.get('theta', 0.04)),
            sigma=float(p.get('sigma', 0.3)),
            rho=float(p.get('rho', -0.6)),
            r=float(p.get('r', 0.02)),
            q=float(p.get('q', 0.0)),
            S0=float(p.get('S0', 100.0)),
            V0=float(p.get('V0', 0.04))
        )
    except AssertionError as e:
        raise ValueError(str(e)) from e


def parse_reference_date(data: dict) -> datetime.date:
    value = data.get('reference_date')
    if value is None:
        return datetime.date.today()
    if not isinstance(value, str):
        raise ValueError(f"reference_date must be an ISO date string, got {value!r}")
    return datetime.date.fromisoformat(value)


def parse_seed(data: dict):
    seed = data.get('seed')
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
        raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
    return seed


def to_json_list(a: np.ndarray) -> list:
    """Convert an array to nested lists, mapping NaN to None."""
    return np.where(np.isnan(a), None, a).tolist()


def error_response(e: Exception, status: int):
    return jsonify({'success': False, 'error': str(e)}), status


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTES
# ═══════════════════════════════════════════════════════════════════════════════

@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'service': 'Heston Process API',
        'version': '1.0.0'
    })


@app.route('/api/process', methods=['POST'])
def describe_process():
    """
    Build a process and report its initial state.

    Request JSON:
    {
        "params": {kappa, theta, sigma, rho, r, q, S0, V0},
        "reference_date": "YYYY-MM-DD" (optional)
    }

    Response JSON:
    {
        "success": true,
        "size": 2,
        "initial_values": [S0, V0],
        "feller_ratio": float,
        "feller_satisfied": bool,
        "params": {...}
    }
    """
    try:
        data = get_json_data()
        params = parse_params(data)
        process = build_process(params, parse_reference_date(data))

        return jsonify({
            'success': True,
            'size': process.size(),
            'initial_values': process.initial_values().tolist(),
            'feller_ratio': float(params.feller_ratio),
            'feller_satisfied': bool(params.feller_satisfied),
            'params': params.to_dict()
        })
    except ValueError as e:
        return error_response(e, 400)
    except Exception as e:
        return error_response(e, 500)


@app.route('/api/process/coefficients', methods=['POST'])
def process_coefficients():
    """
    Evaluate drift and diffusion at a state.

    Request JSON:
    {
        "params": {...},
        "t": time (default 0),
        "x": [S, V] (default: initial values),
        "dt": step length for the covariance (default 1/252)
    }

    Response JSON:
    {
        "success": true,
        "drift": [μ₀, μ₁],
        "diffusion": [[...], [...]],
        "covariance": [[...], [...]]
    }

    NaN entries (|ρ| > 1) are returned as null.
    """
    try:
        data = get_json_data()
        params = parse_params(data)
        process = build_process(params, parse_reference_date(data))

        t = float(data.get('t', 0.0))
        dt = float(data.get('dt', 1.0 / 252))
        x = data.get('x')
        x = process.initial_values() if x is None else np.asarray(x, dtype=float)

        with np.errstate(invalid='ignore'):
            drift = process.drift(t, x)
            diffusion = process.diffusion(t, x)
            covariance = process.covariance(t, x, dt)

        return jsonify({
            'success': True,
            't': t,
            'x': np.asarray(x).tolist(),
            'drift': to_json_list(drift),
            'diffusion': to_json_list(diffusion),
            'covariance': to_json_list(covariance)
        })
    except ValueError as e:
        return error_response(e, 400)
    except Exception as e:
        return error_response(e, 500)


@app.route('/api/paths', methods=['POST'])
def simulate_paths():
    """
    Simulate raw Heston paths.

    Request JSON:
    {
        "params": {...},
        "T": maturity (default 1.0),
        "N_steps": number of steps (default 252, max 500),
        "N_paths": number of paths (default 10, max 200),
        "seed": random seed (optional)
    }

    Response JSON:
    {
        "success": true,
        "times": [...],
        "S_paths": [[...], ...],
        "V_paths": [[...], ...]
    }
    """
    try:
        data = get_json_data()
        params = parse_params(data)
        process = build_process(params, parse_reference_date(data))

        T = float(data.get('T', 1.0))
        N_steps = int(data.get('N_steps', 252))
        N_paths = int(data.get('N_paths', 10))
        seed = parse_seed(data)

        if N_paths > MAX_PATHS:
            raise ValueError(f"N_paths must not exceed {MAX_PATHS}")
        if N_steps > MAX_STEPS:
            raise ValueError(f"N_steps must not exceed {MAX_STEPS}")

        mc = MonteCarloSimulator(process)
        S_paths, V_paths = mc.simulate_paths(T, N_steps, N_paths, seed)

        return jsonify({
            'success': True,
            'times': np.linspace(0.0, T, N_steps + 1).tolist(),
            'S_paths': S_paths.tolist(),
            'V_paths': V_paths.tolist()
        })
    except ValueError as e:
        return error_response(e, 400)
    except Exception as e:
        return error_response(e, 500)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == '__main__':
    print("=" * 70)
    print("HESTON PROCESS API")
    print("=" * 70)
    print()
    print("  d ln S = (r - q - V/2)dt + √V dW_1")
    print("  dV     = κ(θ - V)dt + σ√V dW_2")
    print("  Corr(dW_1, dW_2) = ρ")
    print()
    print("Starting Flask server...")
    print("  API: http://localhost:5000/api")
    print()
    print("=" * 70)

    app.run(debug=False, host='0.0.0.0', port=5000)
