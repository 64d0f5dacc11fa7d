import sys
import os

# Add the api directory to sys.path
sys.path.append(os.path.join(os.getcwd(), "services/api"))

EXPECTED_ROUTES = [
    "/api/ready",
    "/api/generate-meal-plan",
    "/api/generate-shopping-list",
    "/api/plans",
    "/api/plans/{week_key}",
    "/api/plans/{week_key}/checked",
    "/api/plans/{week_key}/shopping",
]

try:
    from mealweek.main import app
    print("App imported successfully")

    paths = {route.path for route in app.routes if hasattr(route, "path")}
    missing = [p for p in EXPECTED_ROUTES if p not in paths]
    for path in EXPECTED_ROUTES:
        if path in paths:
            print(f"Found route: {path}")

    if missing:
        print(f"ERROR: Routes NOT FOUND: {', '.join(missing)}")
        sys.exit(1)

except Exception as e:
    print(f"App import failed: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
