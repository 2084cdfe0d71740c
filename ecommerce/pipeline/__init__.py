"""Request pipeline: behaviors, validators and the mediator."""
