"""Chat rooms, their participants and per-user chat sessions."""