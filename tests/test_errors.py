import pytest

from elasticbuf import errors


@pytest.mark.parametrize(
    ("cls", "message"),
    [
        (errors.EmptyEngineError, "the internal engine is empty"),
        (errors.EngineShutdownError, "server is going to be shutdown"),
        (errors.EngineInShutdownError, "server is already in shutdown"),
        (errors.AcceptSocketError, "accept a new connection error"),
        (errors.TooManyEventLoopThreadsError, "too many event-loops under LockOSThread mode"),
        (errors.UnsupportedProtocolError, "only unix, tcp/tcp4/tcp6, udp/udp4/udp6 are supported"),
        (errors.UnsupportedTCPProtocolError, "only tcp/tcp4/tcp6 are supported"),
        (errors.UnsupportedUDPProtocolError, "only udp/udp4/udp6 are supported"),
        (errors.UnsupportedUDSProtocolError, "only unix is supported"),
        (errors.UnsupportedPlatformError, "unsupported platform in gnet"),
        (errors.UnsupportedOpError, "unsupported operation"),
        (errors.NegativeSizeError, "negative size is invalid"),
        (errors.NoIPv4AddressOnInterfaceError, "no IPv4 address on interface"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message
    assert issubclass(cls, errors.Error)


def test_custom_message_overrides_default():
    err = errors.UnsupportedOpError("custom text")
    assert str(err) == "custom text"


def test_errors_caught_through_base_class():
    err = errors.EngineShutdownError()
    assert isinstance(err, errors.Error)
    assert str(err) == "server is going to be shutdown"


def test_negative_size_is_value_error():
    err = errors.NegativeSizeError()
    assert isinstance(err, ValueError)
    assert str(err) == "negative size is invalid"