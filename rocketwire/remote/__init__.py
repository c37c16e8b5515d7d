"""Remoting command frames and TCP connections."""