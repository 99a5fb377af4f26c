"""
StuntCheck Gateway — API Routes Package
=========================================

Route inventory:
    - auth.py:         POST /api/auth/register, POST /api/auth/login,
                       GET /api/auth/me, PUT /api/auth/me/{user_id}
    - children.py:     POST/GET /api/children, GET/PUT/DELETE /api/children/{id}
    - predictions.py:  POST /api/predict, POST/GET /api/predictions,
                       GET/DELETE /api/predictions/{id}
    - diagnostics.py:  GET /api/checking-flask, GET /api/check-flask, GET /
    - health.py:       GET /health

Routes stay thin: parse the request, call a service, shape the response.
Failures are raised as StuntCheckError subclasses and rendered by the
handlers registered in main.py.
"""
