import logging

from storefront_edge import config, create_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app()

if __name__ == '__main__':
    print(f"Storefront démarré sur http://localhost:{config.PORT} (Backend : {config.BACKEND_URL})")
    app.run(debug=True, port=config.PORT)
