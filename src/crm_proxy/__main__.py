"""Allow ``python -m src.crm_proxy``."""

from src.crm_proxy import run

if __name__ == "__main__":
    run.main()
