from hotel_booking import create_app

app = create_app()
