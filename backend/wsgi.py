from voltmanager import create_app

app = create_app()
