def test_imports():
    import actionpalette
    from actionpalette.server.app_factory import create_app  # noqa: F401
    from actionpalette.services import StrategyDispatcher  # noqa: F401

    assert actionpalette.__version__
    for name in actionpalette.__all__:
        assert hasattr(actionpalette, name), name
