"""
Run the catalog server with the uvicorn access log filter applied.

Usage:
    python run_server.py
"""

if __name__ == "__main__":
    import uvicorn
    from uvicorn.config import LOGGING_CONFIG

    log_config = dict(LOGGING_CONFIG)
    log_config["filters"] = {
        "exclude_metrics": {"()": "uvicorn_filters.ExcludeMetricsFilter"}
    }
    log_config["handlers"] = {
        **LOGGING_CONFIG["handlers"],
        "access": {
            **LOGGING_CONFIG["handlers"]["access"],
            "filters": ["exclude_metrics"],
        },
    }

    uvicorn.run(
        "catalog:application",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_config=log_config,
    )
