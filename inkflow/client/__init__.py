"""Клиентская часть: автосохранение, локальные коллекции и шлюз к API."""
