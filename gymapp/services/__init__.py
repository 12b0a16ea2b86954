# Business logic services. Routes call these with the request's member;
# nothing here reads the Flask session.
