class WidgetError(Exception):
    """
    A common superclass for all
    exceptions regarding triwidgets.
    """
    pass

# == Lifecycle errors ==

class WidgetAlreadyRunningError(WidgetError):
    """
    Raised when a Widget is spawned or hooked
    while its listen loop is already running.
    """
    pass

class WidgetNotRunningError(WidgetError):
    """
    Raised when closing a Widget that is
    not running.
    """
    pass

class WidgetIndexOutOfBoundsError(WidgetError):
    """
    Reserved for widgets that page through
    a list of embeds.
    """
    pass

# == Content errors ==

class WidgetNoMessageError(WidgetError):
    """
    Raised when an operation needs the Widget's
    message, but it was neither spawned nor hooked.
    """
    pass

class WidgetNoEmbedError(WidgetError):
    """
    Raised when a Widget has no embed to spawn,
    or the message it hooks onto carries none.
    """
    pass

# == Input errors ==

class WidgetQueryTimeoutError(WidgetError):
    """
    Raised when Widget.query_input gets no
    reply from the queried user in time.
    """
    pass
