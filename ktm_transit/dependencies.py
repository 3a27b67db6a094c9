from fastapi import Request

# Services are built once in the application lifespan and kept on app.state

def get_network(request: Request):
    """Network tables loaded at startup"""
    return request.app.state.network

def get_planning_engine(request: Request):
    return request.app.state.planning_engine

def get_fare_calculator(request: Request):
    return request.app.state.fare_calculator

def get_realtime_service(request: Request):
    return request.app.state.realtime_service
